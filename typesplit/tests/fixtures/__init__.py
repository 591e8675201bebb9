"""Test fixtures for typesplit tests.

This module provides sample declaration documents shaped like the output of
the Prisma client generator, plus small documents for single behaviours.
"""

# Two interfaces, one referencing the other
SIMPLE_DOCUMENT = """\
export interface A {
  b: B
}

export interface B {
  value: string
}
"""

# A union alias over two local interfaces
UNION_DOCUMENT = """\
export type C = D | E;

export interface D {
  d: number
}

export interface E {
  e: number
}
"""

# Only a builtin array element type
ARRAY_DOCUMENT = """\
export interface F {
  g: string[]
}
"""

# Extends a type that is not declared anywhere
EXTERNAL_BASE_DOCUMENT = """\
export interface G extends H {
  g: string
}
"""

# Classes with heritage clauses and class properties
CLASS_DOCUMENT = """\
export class Base {
  id: number
}

export class Derived extends Base implements Shape {
  shape: Shape
  items: Item[]
}

export interface Shape {
  kind: string
}

export interface Item {
  id: number
}
"""

# Built-in names shadowed by a local declaration
BUILTIN_DOCUMENT = """\
export interface Wrapper {
  created: Date
  tags: Array<Tag>
  pending: Promise<String>
}

export interface Date {
  epoch: number
}

export type Tag = string;
"""

# Generated client layout: a few top-level aliases and the Prisma namespace
PRISMA_DOCUMENT = """\
import * as runtime from './runtime/library.js';

export type PrismaPromise<T> = $Public.PrismaPromise<T>

export type User = $Result.DefaultSelection<Prisma.$UserPayload>

export namespace Prisma {
  export type TransactionIsolationLevel = 'ReadUncommitted' | 'Serializable'

  export type UserWhereInput = {
    AND?: UserWhereInput | UserWhereInput[]
    id?: IntFilter<"User"> | number
    posts?: PostListRelationFilter
  }

  export interface PostListRelationFilter {
    every?: Prisma.PostWhereInput
    none?: PostWhereInput
  }

  export type PostWhereInput = {
    title?: StringFilter<"Post"> | string
    author?: XOR<UserRelationFilter, UserWhereInput>
  }

  export class PrismaClientKnownRequestError extends runtime.PrismaClientKnownRequestError {
    code: string
  }

  export function sql(strings: TemplateStringsArray): void;
}
"""

PRISMA_CONSTRUCT_NAMES = [
    'PrismaPromise',
    'User',
    'TransactionIsolationLevel',
    'UserWhereInput',
    'PostListRelationFilter',
    'PostWhereInput',
    'PrismaClientKnownRequestError',
]

PRISMA_GRAPH = {
    'PrismaPromise': set(),
    'User': set(),
    'TransactionIsolationLevel': set(),
    'UserWhereInput': {'PostListRelationFilter'},
    'PostListRelationFilter': {'PostWhereInput'},
    'PostWhereInput': {'UserWhereInput'},
    'PrismaClientKnownRequestError': set(),
}

# Not valid TypeScript
BROKEN_DOCUMENT = """\
export interface A {
  b: B

export type = ;
"""
