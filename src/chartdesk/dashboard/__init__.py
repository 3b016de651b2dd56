"""JSON API consumed by the chart rendering layer."""
