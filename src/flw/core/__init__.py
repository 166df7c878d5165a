"""flw core: errors, logging and settings shared by every layer."""
