"""Document AI canonicalization service.

Routes uploaded documents to a cloud document-analysis processor and
projects its nested page, field, table, and entity output into one
stable, processor-agnostic result shape.
"""
