# tripline/routes/__init__.py
