"""trashcan error routing — sinks that react to funneled errors.

Sinks are plain ``"error"`` listeners with a side effect: appending to a
log file or sending an email.  Each sink owns one background worker so the
listener call returns before any I/O happens.
"""
