"""
hkanno - Havok animation annotation editor core.

Translates the line-oriented hkanno text format to and from a structured
document model, and keeps the editable text correlated line-by-line with
the hkx XML preview: text → parser → model → serializer / preview →
correlator → cursor sync.
"""

__version__ = "0.1.0"
