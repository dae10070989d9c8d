"""
The CONTROLLER layer turns user input into viewport updates and model
mutations. Apart from the Qt-backed store it is plain Python and can be
driven without a window.
"""
