"""
Realty CRM - contacts, appointments and property listings for an independent agent.
"""

__version__ = "1.0.0"
