"""
MediCare HMS project package (settings, URL configuration, WSGI entry point).
"""
