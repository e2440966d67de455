"""GraphQL documents issued by the client stores."""

# Ads

_CAMPAIGN_FIELDS = """
      id
      campaignName
      description
      status
      startDate
      endDate
      priority
      pacingMode
      impressionsPurchased
      impressionsDelivered
      packageBreakdown
"""

GET_ALL_ACTIVE_ADS_QUERY = f"""
  query GetAllActiveAds {{
    getAllActiveAds {{{_CAMPAIGN_FIELDS}    }}
  }}
"""

GET_ACTIVE_ADS_BY_TYPE_QUERY = f"""
  query GetActiveAdsByType($adType: String!) {{
    getActiveAdsByType(adType: $adType) {{{_CAMPAIGN_FIELDS}    }}
  }}
"""

GET_ADSENSE_SETTINGS_QUERY = """
  query GetAdSenseSettings {
    getAdSenseSettings {
      clientId
      imageSlot {
        id
        enabled
      }
      videoSlot {
        id
        enabled
      }
    }
  }
"""

GET_ACTIVE_AD_PACKAGES_QUERY = """
  query GetActiveAdPackages {
    activeAdPackages {
      id
      packageName
      description
      adType
      placement
      format
      durationDays
      impressionLimit
      basePrice
      isActive
    }
  }
"""

# Bids

_BID_FIELDS = """
      id
      listingId
      bidderId
      amount
      createdAt
      bidder {
        id
        name
        email
      }
"""

PLACE_BID_MUTATION = f"""
  mutation PlaceBid($input: PlaceBidInput!) {{
    placeBid(input: $input) {{{_BID_FIELDS}    }}
  }}
"""

GET_LISTING_BIDS_QUERY = f"""
  query GetListingBids($listingId: ID!) {{
    listingBids(listingId: $listingId) {{{_BID_FIELDS}    }}
  }}
"""

GET_PUBLIC_LISTING_BIDS_QUERY = f"""
  query GetPublicListingBids($listingId: ID!) {{
    publicListingBids(listingId: $listingId) {{{_BID_FIELDS}    }}
  }}
"""

GET_HIGHEST_BID_QUERY = f"""
  query GetHighestBid($listingId: ID!) {{
    highestBid(listingId: $listingId) {{{_BID_FIELDS}    }}
  }}
"""

GET_MY_BIDS_QUERY = """
  query GetMyBids {
    myBids {
      id
      listingId
      bidderId
      amount
      createdAt
      listing {
        id
        title
        imageKeys
      }
    }
  }
"""

# Wishlist

MY_WISHLIST_QUERY = """
  query MyWishlist {
    myWishlist {
      id
      title
      priceMinor
      status
      imageKeys
      wishlistCount
    }
  }
"""

ADD_TO_WISHLIST_MUTATION = """
  mutation AddToWishlist($listingId: ID!, $isArchived: Boolean) {
    addToWishlist(listingId: $listingId, isArchived: $isArchived)
  }
"""

REMOVE_FROM_WISHLIST_MUTATION = """
  mutation RemoveFromWishlist($listingId: ID!, $isArchived: Boolean) {
    removeFromWishlist(listingId: $listingId, isArchived: $isArchived)
  }
"""

# Chat

_THREAD_FIELDS = """
      id
      listingId
      buyerId
      sellerId
      lastMessageAt
"""

_MESSAGE_FIELDS = """
      id
      threadId
      senderId
      text
      imageKey
      status
      createdAt
"""

GET_OR_CREATE_THREAD_MUTATION = f"""
  mutation GetOrCreateThread($input: GetOrCreateThreadInput!) {{
    getOrCreateThread(input: $input) {{{_THREAD_FIELDS}    }}
  }}
"""

MY_THREADS_QUERY = f"""
  query MyThreads {{
    myThreads {{{_THREAD_FIELDS}    }}
  }}
"""

SEND_MESSAGE_MUTATION = f"""
  mutation SendMessage($input: SendMessageInput!) {{
    sendMessage(input: $input) {{{_MESSAGE_FIELDS}    }}
  }}
"""

THREAD_MESSAGES_QUERY = f"""
  query ThreadMessages($threadId: ID!, $limit: Int) {{
    threadMessages(threadId: $threadId, limit: $limit) {{{_MESSAGE_FIELDS}    }}
  }}
"""

EDIT_MESSAGE_MUTATION = """
  mutation EditMessage($input: EditMessageInput!) {
    editMessage(input: $input) {
      id
      threadId
      senderId
      text
      imageKey
      status
      createdAt
    }
  }
"""

MARK_THREAD_READ_MUTATION = """
  mutation MarkThreadRead($input: MarkReadInput!) {
    markThreadRead(input: $input)
  }
"""

UNREAD_COUNT_QUERY = """
  query UnreadCount {
    unreadCount
  }
"""

DELETE_MESSAGE_MUTATION = """
  mutation DeleteMessage($input: DeleteMessageInput!) {
    deleteMessage(input: $input)
  }
"""

DELETE_THREAD_MUTATION = """
  mutation DeleteThread($threadId: ID!) {
    deleteThread(threadId: $threadId)
  }
"""

CREATE_REPORT_MUTATION = """
  mutation CreateReport($reportedUserId: ID!, $entityType: String!, $entityId: ID, $reason: String!, $details: String) {
    createReport(
      reportedUserId: $reportedUserId
      entityType: $entityType
      entityId: $entityId
      reason: $reason
      details: $details
    ) {
      id
      status
    }
  }
"""

BLOCK_USER_MUTATION = """
  mutation BlockUser($blockedUserId: ID!) {
    blockUser(blockedUserId: $blockedUserId) {
      id
      blockedAt
    }
  }
"""

UNBLOCK_USER_MUTATION = """
  mutation UnblockUser($blockedUserId: ID!) {
    unblockUser(blockedUserId: $blockedUserId)
  }
"""

MY_BLOCKED_USERS_QUERY = """
  query MyBlockedUsers {
    myBlockedUsers {
      id
      blockedUserId
      blockedAt
    }
  }
"""

CREATE_IMAGE_UPLOAD_URL_MUTATION = """
  mutation CreateImageUploadUrl {
    createImageUploadUrl {
      uploadUrl
      assetKey
    }
  }
"""

# Admin: ad campaigns

GET_ALL_AD_CAMPAIGNS_QUERY = f"""
  query GetAllAdCampaigns($filter: FilterAdCampaignsInput) {{
    adCampaigns(filter: $filter) {{{_CAMPAIGN_FIELDS}    }}
  }}
"""

GET_AD_CAMPAIGN_BY_ID_QUERY = f"""
  query GetAdCampaignById($id: ID!) {{
    adCampaign(id: $id) {{{_CAMPAIGN_FIELDS}    }}
  }}
"""

CREATE_AD_CAMPAIGN_MUTATION = f"""
  mutation CreateAdCampaign($input: CreateAdCampaignInput!) {{
    createAdCampaign(input: $input) {{{_CAMPAIGN_FIELDS}    }}
  }}
"""

UPDATE_AD_CAMPAIGN_MUTATION = f"""
  mutation UpdateAdCampaign($input: UpdateAdCampaignInput!) {{
    updateAdCampaign(input: $input) {{{_CAMPAIGN_FIELDS}    }}
  }}
"""

UPDATE_CAMPAIGN_STATUS_MUTATION = """
  mutation UpdateCampaignStatus($input: UpdateCampaignStatusInput!) {
    updateCampaignStatus(input: $input) {
      id
      status
    }
  }
"""

DELETE_AD_CAMPAIGN_MUTATION = """
  mutation DeleteAdCampaign($input: DeleteAdCampaignInput!) {
    deleteAdCampaign(input: $input)
  }
"""

# Categories

GET_CATEGORIES_QUERY = """
  query GetCategories {
    categories {
      id
      name
      nameAr
      slug
      isActive
      icon
    }
  }
"""

GET_ATTRIBUTES_BY_CATEGORY_QUERY = """
  query GetAttributesByCategorySlug($categorySlug: String!) {
    getAttributesByCategorySlug(categorySlug: $categorySlug) {
      key
      name
      type
      showInFilter
      options {
        key
        value
        sortOrder
      }
    }
  }
"""

# Listings

_LISTING_GRID_FIELDS = """
      id
      title
      priceMinor
      imageKeys
      categoryId
      sellerType
      city
      province
      specs
      specsDisplay
      prices {
        value
        currency
      }
"""

_LISTING_FULL_FIELDS = """
      id
      title
      description
      priceMinor
      status
      imageKeys
      createdAt
      categoryId
      sellerType
      city
      province
      specs
      specsDisplay
      prices {
        value
        currency
      }
"""

LISTINGS_GRID_QUERY = f"""
  query ListingsGrid($filter: ListingFilterInput, $limit: Int, $offset: Int) {{
    listingsSearch(filter: $filter, limit: $limit, offset: $offset) {{{_LISTING_GRID_FIELDS}    }}
  }}
"""

LISTINGS_LIST_QUERY = f"""
  query ListingsList($filter: ListingFilterInput, $limit: Int, $offset: Int) {{
    listingsSearch(filter: $filter, limit: $limit, offset: $offset) {{{_LISTING_FULL_FIELDS}    }}
  }}
"""

LISTINGS_DETAIL_QUERY = f"""
  query ListingsDetail($filter: ListingFilterInput, $limit: Int, $offset: Int) {{
    listingsSearch(filter: $filter, limit: $limit, offset: $offset) {{{_LISTING_FULL_FIELDS}    }}
  }}
"""

LISTINGS_SEARCH_QUERY = f"""
  query ListingsSearch($filter: ListingFilterInput, $limit: Int, $offset: Int) {{
    listingsSearch(filter: $filter, limit: $limit, offset: $offset) {{{_LISTING_FULL_FIELDS}    }}
  }}
"""

LISTINGS_AGGREGATIONS_QUERY = """
  query AggregationsOnly($filter: ListingFilterInput) {
    listingsAggregations(filter: $filter) {
      totalResults
      attributes {
        field
        totalCount
        options {
          value
          count
          key
        }
      }
      provinces {
        value
        count
      }
      cities {
        value
        count
      }
    }
  }
"""

_LISTINGS_QUERIES = {
    "grid": LISTINGS_GRID_QUERY,
    "list": LISTINGS_LIST_QUERY,
    "detail": LISTINGS_DETAIL_QUERY,
}


def listings_query_for(view_type: str) -> str:
    """Pick the smallest listings document for a view type."""
    return _LISTINGS_QUERIES.get(view_type, LISTINGS_SEARCH_QUERY)
