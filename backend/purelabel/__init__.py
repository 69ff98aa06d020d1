"""PureLabel AI - food-label ingredient interpreter."""
