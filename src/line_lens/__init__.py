"""line-lens: inline git blame for the line under the cursor."""

__version__ = "0.1.0"
