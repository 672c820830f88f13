"""
Q-score and collapse-bias computation engine.

Modules
-------
score      : compute_score() — mood / stress → Q score and fear density.
bias       : compute_collapse_bias() + face weight / sampling helpers.
classifier : classify() + recommend() — tank / neutral / ocean banding.
evaluator  : evaluate_interval() + QEngine — one-interval composition.
exceptions : InvalidArgumentError, InvalidDistributionError.

Every function here is pure apart from drawing from an explicit
``random.Random``; there is no I/O and no storage access.
"""
