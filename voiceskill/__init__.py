"""
Hello World voice skill for Alexa and Google Assistant.
"""

__version__ = "0.1.0"
