"""
Services Layer

Pure business logic services that:
- Accept domain inputs (records, sessions, etc.)
- Return domain outputs (records, dicts, etc.)
- Do NOT depend on HTTP request/response objects
- Do NOT mutate data unless explicitly designed to
"""
