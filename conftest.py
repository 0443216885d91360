collect_ignore = ["setup.py", "scripts", "docs"]
