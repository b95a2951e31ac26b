# FaceMesh 468-point contour indices around each eye.
LEFT_EYE_INDICES = (33, 133, 160, 159, 158, 144, 145, 153)
RIGHT_EYE_INDICES = (362, 263, 387, 386, 385, 373, 374, 380)

DEFAULT_THRESHOLD = 50.0
DEFAULT_MESSAGE = "Gaze met the camera!"
