#!/usr/bin/env python
# -*- coding:utf-8 -*-

"""
CSS parser

produces a flat stylesheet: rules, @font-face blocks, other at-rules and comments,
each tagged with a type and its position in the source text
"""

from collections import namedtuple

from simpleparse.parser import Parser

from cssnode import AstNode, Locator

# NOTE: selectors and values are kept as raw text; strings and (...) may contain ';'
CSS_EBNF = r'''
css        := toplevel*
toplevel   := s/atrule/rule
atrule     := fontface/atblock/atstatement
fontface   := '@font-face', s*, block
atblock    := '@', atname, atprelude, atbody
atstatement:= '@', atname, atprelude, ';'
atname     := name
atprelude  := (string/parens/-[{};"'()])*
atbody     := '{', (string/atbody/-[{}"'])*, '}'
rule       := sels, block
sels       := sel, (s*, ',', s*, sel)*
sel        := (parens/attr/string/-[,{}()[;@"'])+
block      := '{', s*, decls, s*, '}'
decls      := decl?, (s*, ';', s*, decl?)*
decl       := property, s*, ':', s*, value
property   := [*_]?, name
value      := (string/parens/-[;{}()"'])+
<attr>     := '[', (string/-"]")*, ']'
<parens>   := '(', (string/parens/-[()"'])*, ')'
<string>   := ('"', -'"'*, '"')/("'", -"'"*, "'")
<name>     := [a-zA-Z_-], [a-zA-Z0-9_-]*
s          := space/comment
space      := [ \t\r\n\v\f]+
comment    := '/*', commtext, '*/'
commtext   := -"*/"*
'''

class Format:
	"""Options for CSS formatting"""
	Minify = False
	Stack = []
	class Indent:
		Char = '\t'
	class Block:
		Indent = True
	class Decl:
		class Value:
			LeadingSpace = True
		LastSemi = True
	@staticmethod
	def canonical():
		Format.Stack.append('canonical')
		Format._canonical()
	@staticmethod
	def minify():
		Format.Stack.append('minify')
		Format._minify()
	@staticmethod
	def pop():
		"""drop the current mode and restore the one before it"""
		# NOTE: intentionally raise exception if none were pushed
		last = Format.Stack.pop()
		prev = Format.Stack[-1] if Format.Stack else 'canonical'
		if prev == 'minify':
			Format._minify()
		else:
			Format._canonical()
		return last
	@staticmethod
	def _canonical():
		Format.Minify = False
		Format.Block.Indent = True
		Format.Decl.Value.LeadingSpace = True
		Format.Decl.LastSemi = True
	@staticmethod
	def _minify():
		Format.Minify = True
		Format.Block.Indent = False
		Format.Decl.Value.LeadingSpace = False
		Format.Decl.LastSemi = False

class ParseError(Exception):
	"""raised when CSS text cannot be parsed"""
	def __init__(self, message, line=None, column=None, source=None):
		self.line = line
		self.column = column
		self.source = source
		super().__init__(message)

Marker = namedtuple('Marker', 'line column')
Position = namedtuple('Position', 'start end source')

def position(ast, loc, source):
	return Position(Marker(*loc.locate(ast.start)),
			Marker(*loc.locate(ast.end)), source)

# strip whitespace and comments
def filter_space(l): return [c for c in l if c.tag not in ('s', 'comment')]

def format_block(decls):
	nd = Format.Indent.Char if Format.Block.Indent else ''
	nl = '\n' if Format.Block.Indent else ''
	le = ';' + nl
	return '{' + nl + \
		((le.join(nd + d.format() for d in decls) +
		 (';' if Format.Decl.LastSemi and not Format.Minify else '') + nl) \
			if decls else '') + '}'

class CSSDoc:
	Parser = Parser(CSS_EBNF)
	def __init__(self, top, source=None):
		self.top = top
		self.source = source
		self.rules = [t for t in top if not isinstance(t, Whitespace)]
	def __repr__(self): return ','.join(map(str, self.top))
	def format(self):
		return ''.join(t.format() for t in self.top).rstrip()
	@staticmethod
	def parse(text, source=None):
		prod = 'css'
		ok, child, nextchar = CSSDoc.Parser.parse(text, production=prod)
		if not ok or nextchar != len(text):
			line, column = Locator(text).locate(nextchar)
			raise ParseError("""Wasn't able to parse %s as a %s (%s chars parsed of %s) at line %s, column %s""" % (
				repr(text[nextchar:nextchar+40]), prod, nextchar, len(text), line, column),
				line, column, source)
		ast = AstNode.make(child or [], text)
		loc = Locator(text)
		return CSSDoc([TopLevel.from_ast(a.child[0], loc, source) for a in ast], source)

class TopLevel:
	@staticmethod
	def from_ast(ast, loc, source):
		if ast.tag == 'atrule':
			ast = ast.child[0]
		if ast.tag == 'rule':
			return Rule.from_ast(ast, loc, source)
		elif ast.tag == 'fontface':
			return FontFace.from_ast(ast, loc, source)
		elif ast.tag in ('atblock', 'atstatement'):
			return AtRule.from_ast(ast, loc, source)
		elif ast.child[0].tag == 'comment':
			return Comment.from_ast(ast.child[0], loc, source)
		return Whitespace(ast.str)

class Rule:
	type = 'rule'
	def __init__(self, selectors, declarations, position=None):
		self.selectors = selectors
		self.declarations = declarations
		self.position = position
	def __repr__(self):
		return 'Rule(%s,%s)' % (self.selectors, self.declarations)
	def format(self):
		j = ',' + (' ' if not Format.Minify else '')
		selstr = j.join(self.selectors)
		if selstr and not Format.Minify:
			selstr += ' '
		nl = '\n' if not Format.Minify else ''
		return selstr + format_block(self.declarations) + nl
	@staticmethod
	def from_ast(ast, loc, source):
		sels = ast.find('sels')
		selectors = [' '.join(s.str.split()) for s in filter_space(sels.child)]
		return Rule(selectors, Decl.from_block(ast.find('block'), loc, source),
			position(ast, loc, source))

class FontFace:
	type = 'font-face'
	def __init__(self, declarations, position=None):
		self.declarations = declarations
		self.position = position
	def __repr__(self):
		return 'FontFace(%s)' % (self.declarations,)
	def format(self):
		nl = '\n' if not Format.Minify else ''
		sp = ' ' if not Format.Minify else ''
		return '@font-face' + sp + format_block(self.declarations) + nl
	@staticmethod
	def from_ast(ast, loc, source):
		return FontFace(Decl.from_block(ast.find('block'), loc, source),
			position(ast, loc, source))

class AtRule:
	"""any other at-rule, kept verbatim; type is its keyword"""
	def __init__(self, name, prelude='', body=None, position=None):
		self.type = name
		self.name = name
		self.prelude = prelude
		self.body = body
		self.position = position
	def __repr__(self):
		return 'AtRule(@%s %s)' % (self.name, self.prelude)
	def is_statement(self):
		return self.body is None
	def format(self):
		nl = '\n' if not Format.Minify else ''
		s = '@' + self.name
		if self.prelude:
			s += ' ' + self.prelude
		if self.body is None:
			return s + ';' + nl
		sp = ' ' if not Format.Minify else ''
		return s + sp + self.body + nl
	@staticmethod
	def from_ast(ast, loc, source):
		name = ast.find('atname').str
		prelude = ast.find('atprelude')
		prelude = ' '.join(prelude.str.split()) if prelude else ''
		body = ast.find('atbody')
		return AtRule(name, prelude, body.str if body else None,
			position(ast, loc, source))

class Comment:
	type = 'comment'
	def __init__(self, text, position=None):
		self.text = text
		self.position = position
	def __repr__(self):
		return 'Comment(%s)' % (self.text,)
	def format(self):
		return '/*' + self.text + '*/' if not Format.Minify else ''
	@staticmethod
	def from_ast(ast, loc, source):
		return Comment(ast.str[2:-2], position(ast, loc, source))

class Whitespace:
	type = 'whitespace'
	def __init__(self, s):
		self.s = s
	def __repr__(self):
		return 'Whitespace(%s)' % (repr(self.s),)
	def format(self):
		if Format.Minify:
			return ''
		if self.s.count('\n') > 1:
			return '\n'
		return self.s

class Decl:
	type = 'declaration'
	def __init__(self, property_, value, position=None):
		self.property = property_
		self.value = value
		self.position = position
	def __repr__(self):
		return 'Decl(%s:%s)' % (self.property, self.value)
	def format(self):
		return self.property + ':' + \
			(' ' if Format.Decl.Value.LeadingSpace else '') + self.value
	@staticmethod
	def from_ast(ast, loc, source):
		"""generate a Decl from an AstNode"""
		prop, val = filter_space(ast.child)
		return Decl(prop.str, val.str.strip(), position(ast, loc, source))
	@staticmethod
	def from_block(ast, loc, source):
		decls = ast.find('decls')
		if decls is None:
			return []
		return [Decl.from_ast(d, loc, source) for d in decls.findall('decl')]
