"""Chapelle Pleine de Gloire - registre des fidèles et présences.

This package is organized by feature modules (members, attendance, statistics,
reports, ...) with a thin Flask controller layer and service/repository layers.
"""
