"""Network module for Memory Cache."""
