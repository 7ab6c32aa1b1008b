"""
Core merge engine: data models, line diffing and chunk merging.
"""
