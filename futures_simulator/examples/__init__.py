"""Example scripts for the futures simulator."""
