# This file is automatically generated by qmaster's setup.py.
short_version = '0.3.0'
version = '0.3.0'
release = True
