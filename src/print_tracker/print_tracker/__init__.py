"""Print Tracker package.

Feature modules (jobs, pricing, reports, users, ...) each carry a thin Flask
controller, a service holding the shop rules and a SQL repository behind a
Protocol. Security state (lockout, throttling) lives in ``security``.
"""
