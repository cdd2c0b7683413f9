"""GraphQL documents for the Shopify Storefront API."""

IMAGE_FIELDS = """
  url
  altText
  width
  height
"""

MONEY_FIELDS = """
  amount
  currencyCode
"""

PRODUCT_SUMMARY_FIELDS = f"""
  id
  title
  handle
  availableForSale
  featuredImage {{{IMAGE_FIELDS}}}
  priceRange {{
    minVariantPrice {{{MONEY_FIELDS}}}
    maxVariantPrice {{{MONEY_FIELDS}}}
  }}
"""

PAGE_INFO_FIELDS = """
  hasNextPage
  hasPreviousPage
  startCursor
  endCursor
"""

CART_FRAGMENT = f"""
fragment CartFields on Cart {{
  id
  checkoutUrl
  totalQuantity
  lines(first: 100) {{
    edges {{
      node {{
        id
        quantity
        merchandise {{
          ... on ProductVariant {{
            id
            title
            selectedOptions {{
              name
              value
            }}
            price {{{MONEY_FIELDS}}}
            product {{
              id
              title
              handle
              featuredImage {{{IMAGE_FIELDS}}}
            }}
          }}
        }}
        cost {{
          totalAmount {{{MONEY_FIELDS}}}
          amountPerQuantity {{{MONEY_FIELDS}}}
        }}
      }}
    }}
  }}
  cost {{
    subtotalAmount {{{MONEY_FIELDS}}}
    totalAmount {{{MONEY_FIELDS}}}
    totalTaxAmount {{{MONEY_FIELDS}}}
  }}
}}
"""

CART_USER_ERROR_FIELDS = """
  userErrors {
    field
    message
    code
  }
"""

# Variables: first, after, query, sortKey, reverse
PRODUCTS_QUERY = f"""
query Products(
  $first: Int!
  $after: String
  $query: String
  $sortKey: ProductSortKeys
  $reverse: Boolean
) {{
  products(first: $first, after: $after, query: $query, sortKey: $sortKey, reverse: $reverse) {{
    edges {{
      cursor
      node {{{PRODUCT_SUMMARY_FIELDS}}}
    }}
    pageInfo {{{PAGE_INFO_FIELDS}}}
  }}
}}
"""

# Variables: handle
PRODUCT_BY_HANDLE_QUERY = f"""
query ProductByHandle($handle: String!) {{
  productByHandle(handle: $handle) {{
    {PRODUCT_SUMMARY_FIELDS}
    description
    descriptionHtml
    images(first: 20) {{
      edges {{
        node {{{IMAGE_FIELDS}}}
      }}
    }}
    variants(first: 100) {{
      edges {{
        node {{
          id
          title
          availableForSale
          quantityAvailable
          selectedOptions {{
            name
            value
          }}
          price {{{MONEY_FIELDS}}}
          compareAtPrice {{{MONEY_FIELDS}}}
        }}
      }}
    }}
    seo {{
      title
      description
    }}
  }}
}}
"""

# Variables: handle, first, after
PRODUCTS_BY_COLLECTION_QUERY = f"""
query ProductsByCollection($handle: String!, $first: Int!, $after: String) {{
  collectionByHandle(handle: $handle) {{
    id
    title
    description
    products(first: $first, after: $after) {{
      edges {{
        cursor
        node {{{PRODUCT_SUMMARY_FIELDS}}}
      }}
      pageInfo {{{PAGE_INFO_FIELDS}}}
    }}
  }}
}}
"""

# Variables: id
CART_QUERY = f"""
query Cart($id: ID!) {{
  cart(id: $id) {{
    ...CartFields
  }}
}}
{CART_FRAGMENT}
"""

# Variables: lines (optional)
CART_CREATE_MUTATION = f"""
mutation CartCreate($lines: [CartLineInput!]) {{
  cartCreate(input: {{ lines: $lines }}) {{
    cart {{
      ...CartFields
    }}
    {CART_USER_ERROR_FIELDS}
  }}
}}
{CART_FRAGMENT}
"""

# Variables: cartId, lines
CART_LINES_ADD_MUTATION = f"""
mutation CartLinesAdd($cartId: ID!, $lines: [CartLineInput!]!) {{
  cartLinesAdd(cartId: $cartId, lines: $lines) {{
    cart {{
      ...CartFields
    }}
    {CART_USER_ERROR_FIELDS}
  }}
}}
{CART_FRAGMENT}
"""

# Variables: cartId, lines ({id, quantity})
CART_LINES_UPDATE_MUTATION = f"""
mutation CartLinesUpdate($cartId: ID!, $lines: [CartLineUpdateInput!]!) {{
  cartLinesUpdate(cartId: $cartId, lines: $lines) {{
    cart {{
      ...CartFields
    }}
    {CART_USER_ERROR_FIELDS}
  }}
}}
{CART_FRAGMENT}
"""

# Variables: cartId, lineIds
CART_LINES_REMOVE_MUTATION = f"""
mutation CartLinesRemove($cartId: ID!, $lineIds: [ID!]!) {{
  cartLinesRemove(cartId: $cartId, lineIds: $lineIds) {{
    cart {{
      ...CartFields
    }}
    {CART_USER_ERROR_FIELDS}
  }}
}}
{CART_FRAGMENT}
"""
