"""planeframe - interactive editor for plane frame and truss models."""
