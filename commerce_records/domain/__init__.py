"""
Domain layer: records, pagination snapshots and call outcomes.
"""
