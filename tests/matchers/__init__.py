"""
Job Matcher Test Suite.

- Block-style matcher (enqueue_job / enqueue_jobs)
- Value-style matcher (have_enqueued_job / have_enqueued_jobs)
- MatcherSpec validation and MatchEvaluator diagnostics
"""
