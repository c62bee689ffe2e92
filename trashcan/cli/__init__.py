"""trashcan CLI — inspect configuration and smoke-test the sinks."""
