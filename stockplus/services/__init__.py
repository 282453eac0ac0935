"""
Services Layer
Presentation-specific services, data getters, and report builders used primarily in routes.

Services should:
- Read and shape data for templates and the JSON API
- Never change stock or payroll data (that belongs to the buisness layer)
"""
