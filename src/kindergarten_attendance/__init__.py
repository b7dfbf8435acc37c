"""Kindergarten attendance package.

Organized by feature modules (attendance, roster, statistics) with a thin
Flask controller layer over service/repository layers.
"""
