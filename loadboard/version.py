VERSION = "2025.11.0"
