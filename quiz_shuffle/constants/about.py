"""Static metadata describing QuizShuffle."""

APP_NAME = "QuizShuffle"
APP_VERSION = "0.1.0"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "QuizShuffle is a classroom quiz backend. Every participant receives a personalized "
    "ordering of questions and options, and submissions are mapped back to the authored "
    "order before grading."
)
