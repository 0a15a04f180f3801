"""
News Agent.

A conversational agent that answers questions about current news. The model
runs on AWS Bedrock and fetches articles from Google News through a browser
session whenever the conversation calls for it.
"""

__version__ = "1.0.0"
