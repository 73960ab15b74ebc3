"""HTTP access to a CVFS session (optional, ``pip install py-cvfs[web]``).

``app.create_app`` serves each system call as a JSON route plus a
browser terminal that drives the shell.
"""
