from datetime import datetime

from destill.buildinfo import extract_build_info, generate_request_id
from destill.cards import TriageCard


def _card(job, state):
    metadata = {"job_state": state} if state is not None else {}
    return TriageCard(job_name=job, metadata=metadata)


def test_failed_build():
    cards = [
        _card("job-a", "failed"),
        _card("job-a", "failed"),
        _card("job-b", "passed"),
        _card("job-c", "passed"),
        _card("job-d", "canceled"),
        _card("job-e", None),
    ]
    info = extract_build_info(cards, "https://example.com/build/1")
    assert info.status == "failed"
    assert info.failed_jobs == ["job-a"]
    assert info.passed_jobs_count == 2
    assert info.other_jobs_count == 1
    assert info.url == "https://example.com/build/1"


def test_passed_build_when_no_failures():
    info = extract_build_info([_card("job-b", "passed")], "u")
    assert info.status == "passed"
    assert info.failed_jobs == []


def test_empty_cards():
    info = extract_build_info([], "u")
    assert info.status == "passed"
    assert info.passed_jobs_count == 0
    assert info.other_jobs_count == 0


def test_timestamp_is_rfc3339_utc():
    info = extract_build_info([], "u")
    parsed = datetime.strptime(info.timestamp, "%Y-%m-%dT%H:%M:%SZ")
    assert parsed.year >= 2024


def test_request_id_format():
    request_id = generate_request_id()
    parts = request_id.split("-")
    assert len(parts) == 3
    assert parts[0] == "req"
    stamp = datetime.strptime(parts[1], "%Y%m%dT%H%M%S")
    assert stamp.year >= 2024
    assert len(parts[2]) == 8
    assert len(bytes.fromhex(parts[2])) == 4
    assert parts[2] == parts[2].lower()


def test_request_ids_are_unique():
    ids = {generate_request_id() for _ in range(50)}
    assert len(ids) == 50