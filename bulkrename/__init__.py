"""Find-and-replace batch file renaming with preview and history."""
