"""Terminal presentation for apiline sessions."""
