class NotAComponent:
    pass
