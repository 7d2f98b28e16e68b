"""
Utils package.

- temporal_utils: timezone resolution and calendar helpers. All dates the
  detection pipeline handles are timezone-aware datetimes in the session's
  timezone.
- ml_performance: stage timing and metrics logging for detection runs.
"""
