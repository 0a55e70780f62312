# destill

Tools for triaging failed CI/CD builds from Buildkite and GitHub Actions.

destill works on error findings taken from build logs, called triage
cards (`destill.cards.TriageCard`). It ranks them, trims them and lays
them out so the likely root cause of a failure is easy to find.

- **Normalization** (`destill.patterns`): one set of log patterns, used at
  two masking levels (`MaskingLevel.RECURRENCE` and
  `MaskingLevel.PRESENTATION`). The recurrence level masks timestamps,
  UUIDs, paths, hashes and numbers so that identical errors group
  together. The presentation level keeps line numbers and only shortens
  what is noise.
- **Sanitizing** (`destill.sanitize`): strips ANSI colour codes, Buildkite
  timestamp markers and carriage returns.
- **Ranking** (`destill.ranking`): sorts findings by confidence and
  recurrence, removes duplicates and splits them into tiers. Tier 1 holds
  unique failures, which appear only in failed jobs. Tier 3 holds common
  noise, which also shows up in passing jobs.
- **Tiered reports** (`destill.tiering`, `destill.findings`,
  `destill.compress`): builds a compact manifest. Tier 1 findings are
  given in full, with compressed context. Everything else is given as a
  short summary that can be looked up later by its id.
- **Build summary** (`destill.buildinfo`): counts failed, passed and other
  jobs from the cards' `job_state` metadata and creates request ids.
- **Storage** (`destill.store`): a thread-safe in-memory store that keeps
  findings per request and indexes them by message hash.
- **Providers** (`destill.provider`): recognizes build URLs, checks that
  the needed API token is set, keeps a registry of provider factories,
  and turns raw API errors into messages a user can act on.
- **Terminal view** (`destill.tui`): a two-panel triage browser. It can
  filter by job, by tier and by free-text search.

## Requirements

Python 3.10 or newer. The terminal view uses `blessed`, and display
widths are measured with `wcwidth`.

## Examples

Compress a log line for display:

```python
from destill.compress import compress_line

compress_line("2024-05-21T10:00:05.123Z [ERROR] Connection failed")
# '[ERROR] Connection failed'

compress_line("Request 550e8400-e29b-41d4-a716-446655440000 failed")
# 'Request <UUID> failed'
```

Clean terminal escape codes out of a message:

```python
from destill.sanitize import clean

clean("\x1b[31mERROR\x1b[0m: message\r\n")
# 'ERROR: message'
```

Recognize a build URL and get a friendly error for a bad one:

```python
from destill.provider import InvalidURLError, parse_url, validate_token, wrap_error

ref = parse_url("https://buildkite.com/org/pipeline/builds/123")
validate_token(ref)  # raises ProviderError if BUILDKITE_API_TOKEN is not set

try:
    parse_url("https://example.com/invalid")
except InvalidURLError as err:
    print(wrap_error(err))  # message, supported URL formats and details
```

Rank findings and build a manifest:

```python
from destill.buildinfo import extract_build_info, generate_request_id
from destill.store import InMemoryStore
from destill.tiering import tier_findings, to_manifest

# `cards` is a list of TriageCard objects.
request_id = generate_request_id()

store = InMemoryStore()
store.store(request_id, cards)

response = tier_findings(cards, 15)
response.build = extract_build_info(cards, "https://buildkite.com/org/pipeline/builds/123")
manifest = to_manifest(request_id, response)
print(manifest.to_dict())
```

Look up a single finding later:

```python
from destill.tiering import card_to_finding

card = store.get_by_hash(request_id, finding_id)  # raises NotFoundError if missing
print(card_to_finding(card).to_dict())
```

Browse findings in the terminal:

```python
from destill.tui.triage import start

start(cards)
```

`destill.tui.triage.MainModel` holds the screen's state and can also be
driven directly: pass it `WindowSize`, `KeyPress`, `CardReceived`,
`PipelineComplete` or `PipelineError` messages through `update()` and
read the screen from `view()`. With `streaming=True` it starts empty and
collects arriving cards until they are merged.

In the triage view:

| Key | Action |
| --- | --- |
| `j` / `k` | move through the list, or scroll the detail panel |
| `Enter` | switch focus between the list and the detail panel |
| `Tab` / `Shift+Tab` | cycle the job filter |
| `0` / `1` / `2` | show all tiers, unique failures only, or noise only |
| `/` | search messages, jobs, hashes, severities and context |
| `r` | merge newly arrived findings and re-rank |
| `Esc` | leave the detail panel, or reset the filters |
| `q` | quit |

## What destill does not do

destill does not fetch builds or logs and does not extract triage cards
from raw log text; the cards must be supplied. No concrete CI provider is
included: `destill.provider.Provider` is an abstract interface, and
`get_provider` only returns providers that were added with
`register_provider`. There is no command-line program, no network tool
server and no persistent database store; `InMemoryStore` keeps findings
only for the life of the process.