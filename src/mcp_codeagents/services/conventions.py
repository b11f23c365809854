"""Framework convention checks, static guides and optimization hints.

Each framework owns a battery of independent text checks. A check may record a
practice the code already follows, a violation, or nothing; checks never
depend on each other's outcome.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable

from ..domain.models import ComponentType, Framework, Severity
from .scoring import violation_score


@dataclass(frozen=True)
class Violation:
    rule: str
    severity: Severity
    message: str
    recommendation: str

    def to_mapping(self) -> dict[str, str]:
        return {
            "rule": self.rule,
            "severity": self.severity.value,
            "message": self.message,
            "recommendation": self.recommendation,
        }


@dataclass
class ConventionReport:
    practices: list[str] = field(default_factory=list)
    violations: list[Violation] = field(default_factory=list)

    @property
    def score(self) -> int:
        return violation_score(len(self.violations))

    def follow(self, practice: str) -> None:
        self.practices.append(practice)

    def violate(
        self, rule: str, severity: Severity, message: str, recommendation: str
    ) -> None:
        self.violations.append(Violation(rule, severity, message, recommendation))


_SCOPE_LAMBDA = re.compile(r"scope.*lambda")
_SERVICE_CLASS = re.compile(r"class\s+\w+Service")
_N_PLUS_ONE_BLOCK = re.compile(r"\.each\s*\{[^}]*\.[a-z_]+")
_LOWERCASE_TYPE = re.compile(r"type\s+[a-z]")
_TRIPLE_NESTING = re.compile(r"\{[^}]*\{[^}]*\{")
_FIELD_BLOCK = re.compile(r"field\s+\w+\s*\{")
_LARGE_COMPONENT_LINES = 50
_MAX_GRAPHQL_NESTING = 3
_RUBOCOP_HINT_THRESHOLD = 5


def _is_functional_component(code: str) -> bool:
    return "function" in code or ("const" in code and "=>" in code)


def check_rails(code: str) -> ConventionReport:
    report = ConventionReport()

    if "class" in code and "< ApplicationRecord" in code:
        report.follow("Model inherits from ApplicationRecord")
        if "validates" not in code:
            report.violate(
                "Rails/Validation",
                Severity.MEDIUM,
                "Models should have validations",
                "Add validations for data integrity",
            )
        if "scope" in code and _SCOPE_LAMBDA.search(code):
            report.violate(
                "Rails/ScopeLambda",
                Severity.LOW,
                "Prefer -> syntax over lambda for scopes",
                "Use scope :name, -> { condition } syntax",
            )

    if "class" in code and "Controller" in code:
        report.follow("Controller follows RESTful conventions")
        mutates = "def create" in code or "def update" in code
        if "before_action" not in code and mutates:
            report.violate(
                "Rails/BeforeAction",
                Severity.MEDIUM,
                "Use before_action for authentication/authorization",
                "Add before_action :authenticate_user! or similar",
            )
        if "params[:" in code and "permit" not in code:
            report.violate(
                "Rails/StrongParameters",
                Severity.HIGH,
                "Always use strong parameters",
                "Use params.require(:model).permit(:attr1, :attr2)",
            )

    if "class" in code and _SERVICE_CLASS.search(code):
        report.follow("Service object pattern detected")
        if "def self.call" not in code and "def initialize" not in code:
            report.violate(
                "Rails/ServicePattern",
                Severity.LOW,
                "Service objects should have a clear interface",
                "Use ServiceClass.call(args) pattern or initialize + call",
            )

    if ".each" in code and _N_PLUS_ONE_BLOCK.search(code):
        report.violate(
            "Rails/NPlusOneQueries",
            Severity.HIGH,
            "Potential N+1 query detected",
            "Use includes() or joins() to eager load associations",
        )

    if ".find(" in code and ".find_by" not in code:
        report.violate(
            "Rails/FindById",
            Severity.LOW,
            "Consider using find_by for optional lookups",
            "Use find_by instead of find when record might not exist",
        )

    return report


def check_react_native(code: str) -> ConventionReport:
    report = ConventionReport()
    functional = _is_functional_component(code)

    if functional:
        report.follow("Functional component detected")
        if "useState" in code and "useEffect" in code:
            report.follow("Using React hooks")
        if "useMemo" in code or "useCallback" in code or "React.memo" in code:
            report.follow("Using memoization for performance")
        elif "function" in code and len(code.split("\n")) > _LARGE_COMPONENT_LINES:
            report.violate(
                "React/Performance",
                Severity.LOW,
                "Large component - consider memoization",
                "Use React.memo, useMemo, or useCallback for optimization",
            )

    if "FlatList" in code or "SectionList" in code:
        report.follow("Using FlatList for lists")
        if "keyExtractor" not in code:
            report.violate(
                "ReactNative/FlatList",
                Severity.MEDIUM,
                "FlatList should have keyExtractor prop",
                "Add keyExtractor={(item, index) => item.id || index}",
            )
        if "getItemLayout" not in code:
            report.violate(
                "ReactNative/FlatListPerformance",
                Severity.LOW,
                "Consider adding getItemLayout for better performance",
                "Add getItemLayout for fixed-height items",
            )

    if "navigation" in code or "NavigationContainer" in code:
        report.follow("Using React Navigation")
        if "navigation.navigate" in code and "navigation.goBack" not in code:
            report.violate(
                "ReactNative/Navigation",
                Severity.LOW,
                "Consider navigation state management",
                "Use navigation state properly and handle back navigation",
            )

    if "fetch" in code or "axios" in code:
        report.follow("Using HTTP client")
        if "try" not in code and "catch" not in code:
            report.violate(
                "ReactNative/ErrorHandling",
                Severity.MEDIUM,
                "Async operations should have error handling",
                "Wrap async calls in try/catch blocks",
            )

    has_state = any(
        marker in code for marker in ("useState", "useReducer", "Context", "Redux")
    )
    if not has_state and functional:
        report.violate(
            "ReactNative/StateManagement",
            Severity.LOW,
            "Component might need state management",
            "Consider using useState, useReducer, Context, or Redux",
        )

    return report


def check_graphql(code: str) -> ConventionReport:
    report = ConventionReport()

    if "type" in code or "input" in code:
        if "description" not in code and '"""' not in code:
            report.violate(
                "GraphQL/SchemaDocumentation",
                Severity.MEDIUM,
                "GraphQL types should have descriptions",
                "Add descriptions to types and fields for better API docs",
            )
        else:
            report.follow("Schema includes descriptions")

    if _LOWERCASE_TYPE.search(code):
        report.violate(
            "GraphQL/Naming",
            Severity.HIGH,
            "GraphQL types should be PascalCase",
            "Use PascalCase for type names: type UserProfile, not type userProfile",
        )

    if "query" in code or "Query" in code:
        report.follow("Query type defined")
        if len(_TRIPLE_NESTING.findall(code)) > _MAX_GRAPHQL_NESTING:
            report.violate(
                "GraphQL/QueryDepth",
                Severity.LOW,
                "Deeply nested queries may impact performance",
                "Consider query depth limiting and complexity analysis",
            )

    if _FIELD_BLOCK.search(code) and "argument" not in code:
        report.violate(
            "GraphQL/FieldArguments",
            Severity.LOW,
            "Fields with complex logic should accept arguments",
            "Add arguments to fields that need filtering or pagination",
        )

    if "resolve" in code or "Resolver" in code:
        report.follow("Using resolvers")
        if "resolve" in code and "->" in code:
            report.follow("Using lambda resolvers")

    if "field" in code and "object" in code:
        report.violate(
            "GraphQL/NPlusOne",
            Severity.MEDIUM,
            "Consider batch loading for associations",
            "Use GraphQL batch loaders or DataLoader pattern",
        )

    return report


CONVENTION_CHECKS: dict[Framework, Callable[[str], ConventionReport]] = {
    Framework.RAILS: check_rails,
    Framework.REACT_NATIVE: check_react_native,
    Framework.GRAPHQL: check_graphql,
}


def check_conventions(code: str, framework: Framework) -> ConventionReport:
    return CONVENTION_CHECKS[framework](code)


def recommendations_for(
    violations: list[Violation], framework: Framework
) -> list[dict[str, str]]:
    """Turn violations into prioritized recommendations."""

    recommendations = [
        {
            "priority": "high" if violation.severity is Severity.HIGH else "medium",
            "rule": violation.rule,
            "message": violation.recommendation or violation.message,
        }
        for violation in violations
    ]
    if framework is Framework.RAILS and len(violations) > _RUBOCOP_HINT_THRESHOLD:
        recommendations.append(
            {
                "priority": "low",
                "message": "Run RuboCop to fix style issues automatically",
            }
        )
    return recommendations


_RAILS_GUIDES: dict[ComponentType, dict[str, Any]] = {
    ComponentType.MODEL: {
        "practices": [
            "Inherit from ApplicationRecord",
            "Add validations for data integrity",
            "Define associations clearly",
            "Use scopes for common queries",
            "Keep business logic in models, but extract complex operations to services",
        ],
        "example": """class User < ApplicationRecord
  has_many :posts, dependent: :destroy

  validates :email, presence: true, uniqueness: true

  scope :active, -> { where(active: true) }
end""",
    },
    ComponentType.CONTROLLER: {
        "practices": [
            "Keep controllers thin",
            "Use before_action for authentication/authorization",
            "Always use strong parameters",
            "Use respond_to for multiple formats",
            "Extract complex logic to service objects",
        ],
        "example": """class PostsController < ApplicationController
  before_action :authenticate_user!
  before_action :set_post, only: [:show, :edit, :update, :destroy]

  def create
    @post = Post.new(post_params)
    if @post.save
      redirect_to @post
    else
      render :new
    end
  end

  private

  def post_params
    params.require(:post).permit(:title, :content)
  end
end""",
    },
    ComponentType.SERVICE: {
        "practices": [
            "Use clear, single-responsibility classes",
            "Use class method .call for simple services",
            "Return result objects for complex operations",
            "Handle errors gracefully",
        ],
        "example": """class CreatePostService
  def self.call(user, params)
    new(user, params).call
  end

  def initialize(user, params)
    @user = user
    @params = params
  end

  def call
    Post.create(@params.merge(user: @user))
  end
end""",
    },
}

_REACT_NATIVE_GUIDES: dict[ComponentType, dict[str, Any]] = {
    ComponentType.COMPONENT: {
        "practices": [
            "Use functional components with hooks",
            "Keep components small and focused",
            "Use React.memo for expensive renders",
            "Extract complex logic to custom hooks",
            "Use proper TypeScript/PropTypes",
        ],
        "example": """import React, { memo } from 'react';
import { View, Text } from 'react-native';

interface ButtonProps {
  title: string;
  onPress: () => void;
}

const Button: React.FC<ButtonProps> = memo(({ title, onPress }) => {
  return (
    <View>
      <Text onPress={onPress}>{title}</Text>
    </View>
  );
});

export default Button;""",
    },
    ComponentType.HOOK: {
        "practices": [
            'Start hook names with "use"',
            "Return consistent data structure",
            "Handle loading and error states",
            "Clean up subscriptions/effects",
        ],
        "example": """import { useState, useEffect } from 'react';

export function useApiData(url: string) {
  const [data, setData] = useState(null);
  const [loading, setLoading] = useState(true);
  const [error, setError] = useState(null);

  useEffect(() => {
    fetch(url)
      .then(res => res.json())
      .then(setData)
      .catch(setError)
      .finally(() => setLoading(false));
  }, [url]);

  return { data, loading, error };
}""",
    },
}

_GRAPHQL_GUIDES: dict[ComponentType, dict[str, Any]] = {
    ComponentType.SCHEMA: {
        "practices": [
            "Use descriptive type and field names",
            "Add descriptions to all types and fields",
            "Use input types for mutations",
            "Implement pagination for lists",
            "Use enums for fixed sets of values",
        ],
        "example": '''type User {
  """Unique identifier for the user"""
  id: ID!

  """User's full name"""
  name: String!

  """User's email address"""
  email: String!

  """Posts created by the user"""
  posts(first: Int, after: String): PostConnection!
}''',
    },
    ComponentType.RESOLVER: {
        "practices": [
            "Keep resolvers thin",
            "Use batch loading for associations",
            "Handle errors appropriately",
            "Cache expensive computations",
            "Validate input arguments",
        ],
        "example": """class Types::UserType < Types::BaseObject
  field :id, ID, null: false
  field :name, String, null: false
  field :posts, Types::PostType.connection_type, null: false

  def posts
    object.posts.limit(20)
  end
end""",
    },
}

GUIDES: dict[Framework, dict[ComponentType, dict[str, Any]]] = {
    Framework.RAILS: _RAILS_GUIDES,
    Framework.REACT_NATIVE: _REACT_NATIVE_GUIDES,
    Framework.GRAPHQL: _GRAPHQL_GUIDES,
}


def best_practices_guide(
    framework: Framework, component_type: ComponentType
) -> dict[str, Any]:
    """Return canned practices and an example; empty for unknown pairs."""

    guide = GUIDES[framework].get(component_type)
    if guide is None:
        return {"practices": [], "example": ""}
    return {"practices": list(guide["practices"]), "example": guide["example"]}


def _optimization(
    kind: str, priority: str, suggestion: str, example: str
) -> dict[str, str]:
    return {
        "type": kind,
        "priority": priority,
        "suggestion": suggestion,
        "example": example,
    }


def suggest_optimizations(code: str, framework: Framework) -> list[dict[str, str]]:
    optimizations: list[dict[str, str]] = []

    if framework is Framework.RAILS:
        if ".each" in code:
            optimizations.append(
                _optimization(
                    "database",
                    "high",
                    "Use includes() or joins() to prevent N+1 queries",
                    "User.includes(:posts).each { |user| "
                    "user.posts.each { |post| ... } }",
                )
            )
        if "def" in code and "Rails.cache" not in code:
            optimizations.append(
                _optimization(
                    "caching",
                    "medium",
                    "Consider caching expensive computations",
                    'Rails.cache.fetch("key", expires_in: 1.hour) '
                    "{ expensive_operation }",
                )
            )
    elif framework is Framework.REACT_NATIVE:
        if "map" in code and "render" in code:
            optimizations.append(
                _optimization(
                    "rendering",
                    "high",
                    "Use FlatList instead of map for long lists",
                    "<FlatList data={items} renderItem={...} keyExtractor={...} />",
                )
            )
        if "function" in code and len(code.split("\n")) > 30:
            optimizations.append(
                _optimization(
                    "performance",
                    "medium",
                    "Consider using React.memo or useMemo",
                    "const MemoizedComponent = React.memo(Component);",
                )
            )
    elif framework is Framework.GRAPHQL:
        if "field" in code and "object" in code:
            optimizations.append(
                _optimization(
                    "queries",
                    "high",
                    "Use batch loading to prevent N+1 queries",
                    "Use GraphQL::Batch or DataLoader pattern",
                )
            )
        optimizations.append(
            _optimization(
                "performance",
                "medium",
                "Implement query complexity analysis",
                "Use graphql-ruby complexity analyzer",
            )
        )

    return optimizations
