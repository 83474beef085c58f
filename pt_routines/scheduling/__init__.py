"""Week plan projection and session reminders."""
