"""
DataONE CLI

Command-line front end for the d1_client library.
"""
