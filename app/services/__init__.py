"""
Project Hub Services Package

- project_service: project lifecycle, embedded tasks and worker assignment,
  keeping user <-> project back-references consistent
- user_service: signup, authentication and user lookups
"""
