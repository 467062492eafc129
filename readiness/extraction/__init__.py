"""Website signal extraction package."""

# from readiness.extraction.website import extract_website_signals, WebsiteScan
