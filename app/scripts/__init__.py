# app/scripts/__init__.py
