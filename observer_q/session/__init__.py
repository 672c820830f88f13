"""
Calibration-session bookkeeping over caller-held measurement lists.

Modules
-------
tracker : build_measurement() + summarize_session() + history_stats()
          + q_trend() / bias_trend() — pure functions, no storage access.
"""
