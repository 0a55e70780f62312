"""Terminal triage view: text helpers, styling, list and detail panels, and the screen model."""