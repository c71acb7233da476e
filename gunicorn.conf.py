# Gunicorn configuration file
# Run with: gunicorn -c gunicorn.conf.py threatsense.main:app

# Worker class
worker_class = "uvicorn.workers.UvicornWorker"

# Each worker keeps its own in-memory threat history
workers = 1

# The socket to bind to
bind = "0.0.0.0:8000"

# Log level
loglevel = "info"

# Log to stdout
accesslog = "-"
errorlog = "-"
