"""
Standard network tags.
"""

TARGET_HOST = "out.host"
TARGET_PORT = "network.destination.port"
