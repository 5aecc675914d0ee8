raise ImportError("optional backend is not installed")
