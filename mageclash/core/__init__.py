"""Core systems shared by every combat layer: enums, events, configuration,
messages and status effects."""
