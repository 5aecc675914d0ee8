"""Component packages scanned by the module discovery tests."""

events: list[str] = []
