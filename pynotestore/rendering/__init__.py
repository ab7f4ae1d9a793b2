"""
Rendering package for Apple Notes (pure, no database access).

Modules:
- renderer: text/attachment interleaving into Markdown
- attachments: UTI-based attachment strategies
- table_builder: MergeableData table reconstruction
"""
