"""
Analytics API Routes - Split into domain-specific modules

This package organizes the dashboard endpoints into logical domains:
- transactions.py: Month transaction listing with search + pagination
- charts.py: Statistics, bar chart and pie chart endpoints
- dashboard.py: Combined (fan-out) dashboard endpoint
- admin.py: Seed and health endpoints

All modules share the same blueprint (analytics_bp) registered at /api.
"""

from flask import Blueprint

# Create the shared blueprint
analytics_bp = Blueprint('analytics', __name__)


# Import all route modules to register their routes with the blueprint
# Order doesn't matter since Flask routes are matched by specificity
from routes.analytics import transactions
from routes.analytics import charts
from routes.analytics import dashboard
from routes.analytics import admin
