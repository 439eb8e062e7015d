"""Employee Portal package.

Organized by feature (auth, records, profile, storage) around explicit
dependency injection: the signed-in identity is handed to every accessor,
never read from ambient state. Flask controllers are a thin layer on top.
"""
