"""certgen command implementations"""
