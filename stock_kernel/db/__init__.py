"""SQLAlchemy persistence primitives for the stock kernel."""
