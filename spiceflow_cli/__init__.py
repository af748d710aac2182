"""
Command line tools for the SpiceFlow SDK.
"""
