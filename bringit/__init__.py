"""
BringIt grocery delivery backend.

Components:
- API: main server, minimal test server, static display pages
- Diagnostics: Stripe and module/route import checks
- Offline: passthrough worker with cache-clearing activation
- Monitoring: structured logging, Prometheus metrics, health checks
"""

__version__ = "1.0.0"
__author__ = "BringIt"
