"""Reconcile package-client subscriptions into a Citrix published-application catalog."""
