"""JSON schemas for distclean configuration files.

- project.schema.json: products, their build output and dist declarations
"""
