#!/usr/bin/env python
# -*- coding:utf-8 -*-

"""
wrap simpleparse result tuples (tag, start, end, children) in a tree we can walk
"""

from bisect import bisect_right

class AstNode:
	def __init__(self, s, tag, start, end, child):
		self.tag = tag
		self.start = start
		self.end = end
		self.str = s[start:end]
		self.child = child
	def find(self, tag):
		"""first direct child tagged tag, or None"""
		for c in self.child:
			if c.tag == tag:
				return c
		return None
	def findall(self, tag):
		return [c for c in self.child if c.tag == tag]
	@staticmethod
	def make(matches, s):
		nodes = []
		for tag, start, end, child in matches:
			n = AstNode(s, tag, start, end,
				AstNode.make(child, s) if child else [])
			nodes.append(n)
		return nodes

class Locator:
	"""map string offsets to 1-based (line, column)"""
	def __init__(self, s):
		self.lines = [0]
		for i, c in enumerate(s):
			if c == '\n':
				self.lines.append(i + 1)
	def locate(self, offset):
		line = bisect_right(self.lines, offset)
		return line, offset - self.lines[line - 1] + 1
