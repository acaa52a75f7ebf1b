"""Route 66 multi-day itinerary planning."""

__version__ = "0.1.0"
